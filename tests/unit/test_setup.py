"""
Basic test to verify package setup is correct.
"""

def test_package_imports():
    """Test that the package can be imported."""
    import cdecomp.smt
    assert cdecomp.smt.__version__ == "0.1.0"
    assert hasattr(cdecomp.smt, '__version__')


def test_package_structure():
    """Test that package structure is accessible."""
    from cdecomp import smt
    from cdecomp.smt.translator import TranslationContext
    assert smt.__version__ == "0.1.0"
    assert smt.TranslationContext is TranslationContext
