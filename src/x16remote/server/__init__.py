"""HTTP control plane for x16remote.

Exposes typing and joystick submission over a small REST API and
drives the scheduler from a background frame loop.
"""
