"""Clinic application for the VetSystem backend.

This package contains the models, services, serializers, views and route
registrations behind the API consumed by the single-page front end.
"""
