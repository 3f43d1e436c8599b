# coding: utf-8

"""
Tests Package

Test suite for the face quickstart. The Azure Face clients are replaced by
mocks, so no endpoint or key is needed.

Test Structure:
- test_config.py: Environment configuration and fail-fast startup
- test_quality_gate.py: Detection and the enrollment and query gates
- test_person_group.py: Group lifecycle, persons, enrollment and training
- test_identification.py: Identify, verify and result rendering
- test_workflow.py: End-to-end run with call ordering

Usage:
    pytest tests -v
"""
