"""
Tests for arborgen

This package contains tests for:
- Growth model and segment extraction
- Tube, junction and leaf mesh synthesis
- Backends, policies and reports
- Command line interface
"""
