"""Test basic package imports."""


def test_package_import():
    """Test that the main package can be imported."""
    import pulse_discovery

    assert pulse_discovery.__version__ == "0.1.0"


def test_public_exports():
    """Test that the subpackages expose their public names."""
    from pulse_discovery.components import __all__ as component_names
    from pulse_discovery.models import __all__ as model_names
    from pulse_discovery.services import DiscoveryService, ConfigurationManager

    assert "DealScorer" in component_names
    assert "Listing" in model_names
    assert DiscoveryService is not None
    assert ConfigurationManager is not None
