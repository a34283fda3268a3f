"""Logging and metrics for kubeherald."""
