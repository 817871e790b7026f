from __future__ import annotations

import pytest

from uvup.models.specifier import DependencySpecifier


def _spec(**kwargs) -> DependencySpecifier:
    defaults = {"name": "requests", "original_constraint": "requests>=2.28.0"}
    defaults.update(kwargs)
    return DependencySpecifier(**defaults)


@pytest.mark.unit
class TestDependencySpecifierInit:
    """Tests for DependencySpecifier defaults and post-init rules."""

    def test_defaults(self) -> None:
        """Test a bare specifier starts unresolved and unselected."""
        spec = DependencySpecifier(name="requests", original_constraint="requests")

        assert spec.extras == ""
        assert spec.operator == ">="
        assert spec.current_version == "0.0.0"
        assert spec.marker is None
        assert spec.latest_version is None
        assert spec.resolving is True
        assert spec.selected is False
        assert spec.is_registry is True
        assert spec.explicit_constraint is False

    def test_non_registry_is_never_resolving(self) -> None:
        """Test non-registry entries are settled from the start."""
        spec = DependencySpecifier(
            name="pkg",
            original_constraint="pkg @ https://example.com/pkg.whl",
            is_registry=False,
            latest_version="1.0",
        )

        assert spec.resolving is False
        assert spec.latest_version is None

    def test_str_returns_original_text(self) -> None:
        """Test str() gives back the declaration byte-for-byte."""
        raw = 'requests[socks] >= 2.28.0 ; python_version >= "3.8"'
        spec = _spec(original_constraint=raw)

        assert str(spec) == raw


@pytest.mark.unit
class TestDependencySpecifierProperties:
    """Tests for derived update information."""

    def test_canonical_name(self) -> None:
        """Test canonical name follows PEP 503 normalisation."""
        assert _spec(name="Django_REST.framework").canonical_name == (
            "django-rest-framework"
        )

    def test_has_update_when_latest_is_newer(self) -> None:
        """Test an older declared version reports an update."""
        spec = _spec(current_version="2.28.0", latest_version="2.31.0")

        assert spec.has_update is True

    @pytest.mark.parametrize(
        "current,latest",
        [("2.31.0", "2.31.0"), ("3.0.0", "2.31.0")],
        ids=["equal", "declared-newer"],
    )
    def test_no_update_when_not_newer(self, current: str, latest: str) -> None:
        """Test equal or newer declared versions report no update."""
        spec = _spec(current_version=current, latest_version=latest)

        assert spec.has_update is False

    def test_no_update_without_latest(self) -> None:
        """Test unresolved entries report no update."""
        assert _spec(current_version="1.0").has_update is False

    def test_non_registry_never_has_update(self) -> None:
        """Test non-registry entries never report an update."""
        spec = _spec(is_registry=False)
        spec.latest_version = "99.0"

        assert spec.has_update is False

    def test_unconstrained_has_update(self) -> None:
        """Test a declaration without constraint compares against 0.0.0."""
        spec = _spec(original_constraint="requests", latest_version="2.31.0")

        assert spec.has_update is True

    def test_not_found(self) -> None:
        """Test not_found is only true once resolution settled without a version."""
        spec = _spec()
        assert spec.not_found is False

        spec.resolving = False
        assert spec.not_found is True

        spec.latest_version = "1.0"
        assert spec.not_found is False

    @pytest.mark.parametrize(
        "current,latest,expected",
        [
            ("1.2.3", "2.0.0", "major"),
            ("1.2.3", "1.3.0", "minor"),
            ("1.2.3", "1.2.4", "patch"),
            ("1.2.3", "1.2.3", "none"),
        ],
    )
    def test_change_type(self, current: str, latest: str, expected: str) -> None:
        """Test change magnitude between declared and latest versions."""
        spec = _spec(current_version=current, latest_version=latest)

        assert spec.change_type == expected

    def test_change_type_without_latest(self) -> None:
        """Test change magnitude is none while unresolved."""
        assert _spec(current_version="1.0.0").change_type == "none"


@pytest.mark.unit
class TestDisplayVersion:
    """Tests for DependencySpecifier.display_version."""

    def test_explicit_constraint(self) -> None:
        spec = _spec(operator="~=", current_version="1.4", explicit_constraint=True)

        assert spec.display_version() == "~=1.4"

    def test_unconstrained(self) -> None:
        assert _spec().display_version() == "any"

    def test_non_registry(self) -> None:
        assert _spec(is_registry=False).display_version() == "unmanaged"
