"""Adapters layer for the dialysis log converter.

This module contains input/output adapters that interface with external
systems. Adapters implement Port interfaces defined in the domain layer:
byte sources feed the decoder, presenters and exporters consume its output.
"""
