"""kubeherald: forwards significant Kubernetes events to an error-tracking sink."""

__version__ = "0.1.0"
