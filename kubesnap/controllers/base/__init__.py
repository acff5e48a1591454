"""Base classes for snapshot builders."""

from kubesnap.controllers.base.domain_builder import DomainBuilder

__all__ = ["DomainBuilder"]
