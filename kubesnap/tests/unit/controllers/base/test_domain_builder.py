"""Tests for the DomainBuilder base class."""

from __future__ import annotations

import pytest

from kubesnap.controllers.base import domain_builder
from kubesnap.controllers.base.domain_builder import DomainBuilder
from kubesnap.models.snapshot.snapshot import Snapshot


class EchoBuilder(DomainBuilder):
    domain = "echo"

    async def build_snapshot(self, scope: str) -> Snapshot:
        return Snapshot(domain=self.domain, scope=scope)


class TestDomainBuilder:
    def test_abstract_base_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            DomainBuilder()

    @pytest.mark.asyncio
    async def test_call_delegates_to_build_snapshot(self) -> None:
        snap = await EchoBuilder()("team-a")
        assert snap.domain == "echo"
        assert snap.scope == "team-a"

    def test_module_declares_no_logger(self) -> None:
        assert not hasattr(domain_builder, "logger")
