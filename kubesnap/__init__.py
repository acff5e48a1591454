"""kubesnap - snapshot orchestration for multi-cluster Kubernetes views."""

__version__ = "0.1.0"
