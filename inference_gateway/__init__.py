"""
Inference Gateway

Forwards ECG record uploads to the apnea and diabetes model servers.
"""

__version__ = "1.0.0"
