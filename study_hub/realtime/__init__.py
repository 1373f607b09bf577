"""Realtime infrastructure (Socket.IO rooms, publishers, client reconciliation).

One socket server is shared by classes, study groups and chat; each domain
publishes through ``study_hub.realtime.events``.
"""
