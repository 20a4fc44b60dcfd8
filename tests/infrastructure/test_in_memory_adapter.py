"""Tests for InMemoryCoverageAdapter and the create_coverage_service factory."""

from __future__ import annotations

import logging
import math

import pytest

from domain.coverage.entities import CoverageSession
from domain.coverage.ports import CoverageSessionPort
from infrastructure.coverage import InMemoryCoverageAdapter, create_coverage_service


@pytest.fixture
def adapter() -> InMemoryCoverageAdapter:
    return InMemoryCoverageAdapter()


# ===========================================================================
# No active session
# ===========================================================================
def test_queries_without_session(adapter):
    assert adapter.get_current_session() is None
    assert adapter.paint(1.0, 1.0) is None
    assert adapter.get_stats() is None
    assert adapter.get_boundary() is None
    assert adapter.get_voxels() == []
    assert adapter.is_inside_boundary(100.0, 100.0) is True


@pytest.mark.parametrize(
    "call",
    [
        lambda a: a.set_boundary([(0, 0), (1, 0), (1, 1)]),
        lambda a: a.clear_boundary(),
        lambda a: a.reset(),
        lambda a: a.full_reset(),
    ],
)
def test_mutators_without_session_are_noops(adapter, call, caplog):
    with caplog.at_level(logging.WARNING):
        call(adapter)

    assert adapter.get_current_session() is None
    assert "ignored: no active session" in caplog.text


# ===========================================================================
# Session lifecycle
# ===========================================================================
def test_create_session_assigns_sequential_ids(adapter):
    first = adapter.create_session()
    second = adapter.create_session(0.1)

    assert first.id == "session-1"
    assert second.id == "session-2"
    assert second.voxel_size == pytest.approx(0.1)
    assert adapter.get_current_session() is second


def test_new_session_discards_previous(adapter):
    adapter.create_session(0.1)
    adapter.paint(0.05, 0.05)

    adapter.create_session(0.1)

    assert adapter.get_voxels() == []


def test_create_session_logs(adapter, caplog):
    with caplog.at_level(logging.INFO):
        adapter.create_session(0.05)

    assert "Created coverage session session-1" in caplog.text


def test_adapters_are_independent():
    a = create_coverage_service(0.1)
    b = create_coverage_service(0.1)

    a.paint(0.05, 0.05)

    assert len(a.get_voxels()) == 1
    assert b.get_voxels() == []


def test_satisfies_port(adapter):
    port: CoverageSessionPort = adapter
    assert isinstance(port.create_session(), CoverageSession)


# ===========================================================================
# Delegation
# ===========================================================================
def test_paint_and_stats():
    service = create_coverage_service(0.05)

    result = service.paint(1.52, 2.32)

    assert result.is_new is True
    assert result.is_inside_boundary is True
    assert (result.voxel.grid_x, result.voxel.grid_y) == (30, 46)
    assert service.paint(1.53, 2.33).is_new is False
    stats = service.get_stats()
    assert stats.voxel_count == 1
    assert stats.coverage_percent is None


def test_boundary_round_trip():
    service = create_coverage_service(0.5)

    service.set_boundary([{"x": 0, "y": 0}, {"x": 1, "y": 0}, {"x": 1, "y": 1}, {"x": 0, "y": 1}])

    boundary = service.get_boundary()
    assert boundary is not None
    assert boundary.area == pytest.approx(1.0)
    assert service.is_inside_boundary(0.5, 0.5)
    assert not service.is_inside_boundary(2.0, 2.0)

    service.clear_boundary()
    assert service.get_boundary() is None


def test_set_boundary_rejects_two_points():
    service = create_coverage_service()

    with pytest.raises(ValueError):
        service.set_boundary([(0, 0), (1, 1)])


def test_full_coverage_of_square():
    service = create_coverage_service(0.5)
    service.set_boundary([(0, 0), (1, 0), (1, 1), (0, 1)])

    for x, y in [(0.25, 0.25), (0.75, 0.25), (0.25, 0.75), (0.75, 0.75)]:
        service.paint(x, y)

    stats = service.get_stats()
    assert stats.voxel_count == 4
    assert stats.coverage_percent == pytest.approx(100.0)
    assert stats.is_complete is True


def test_reset_keeps_boundary_full_reset_drops_it():
    service = create_coverage_service(0.5)
    service.set_boundary([(0, 0), (1, 0), (1, 1), (0, 1)])
    service.paint(0.25, 0.25)

    service.reset()
    assert service.get_voxels() == []
    assert service.get_boundary() is not None

    service.paint(0.25, 0.25)
    service.full_reset()
    assert service.get_voxels() == []
    assert service.get_boundary() is None


def test_infinite_voxel_size_rejected_up_front():
    with pytest.raises(ValueError, match="voxel_size"):
        create_coverage_service(math.inf)
