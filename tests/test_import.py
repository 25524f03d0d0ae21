"""Basic import tests to verify package structure."""


def test_import_rmsim():
    """Verify main package imports."""
    import rmsim
    assert rmsim.__version__ == "0.1.0"


def test_import_core():
    """Verify core module structure exists."""
    from rmsim import core
    assert hasattr(core, "PartitionedBuffer")


def test_import_app():
    """Verify app module structure exists."""
    from rmsim import app
    assert hasattr(app, "build_applications")


def test_import_sim_and_analysis():
    """Verify sim and analysis modules exist."""
    from rmsim import sim, analysis
    assert hasattr(sim, "LoopbackWorld")
    assert hasattr(analysis, "EventCounter")
