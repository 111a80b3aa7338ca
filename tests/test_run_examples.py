"""Test module to run examples from the examples.flextrack package

The tests are run using pytest.
"""

import pytest  # pylint: disable=unused-import

import flextrack.common
import flextrack.curve
from examples.flextrack import curve_demo


def test_examples_curve_demo():
    """Test function for curve_demo example"""
    curve_demo.main()
    assert True


def test_curve_main():
    """Test function for the flextrack.curve module main"""
    flextrack.curve.main()
    assert True


def test_common_main():
    """Test function for the flextrack.common module main"""
    flextrack.common.main()
    assert True
