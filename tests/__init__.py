"""
chaosstream Test Suite

Pytest-based tests for the Lorenz-family integration engine.

Test Structure:
- test_fields.py: Lorenz / Lorenz-96 vector fields and cyclic indexing
- test_integrator.py: RK4 stepping contract and regression trace
- test_stream.py: lazy trajectory streams and bounded pulls
- test_geometry.py: vertex projection and line connectivity
- test_normalize.py: peak normalization and its failure conditions
- test_audio_export.py: bounded audio path and WAV output
- test_config.py: YAML configuration and run construction
- test_parallel.py: independent trajectories run concurrently
- test_cli.py: command-line smoke tests

Run tests with: pytest
"""
