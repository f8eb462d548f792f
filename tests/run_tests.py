"""Test runner script"""

import unittest
import sys
import os

# Add the project root so the modules can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Test modules
from test_config import TestConfigManager
from test_models import TestWorkOrder, TestSessionState, TestSessionSummary, TestRate
from test_file_handler import TestFileHandler
from test_logger import TestEventLogger, TestConfigureLogging
from test_session import TestSessionTransitions, TestSessionTiming, TestSessionNotifications
from test_capture import TestKeyboardCodeReader, TestVisualCodeCapture, TestCodeCapture, TestCameraBackends
from test_directory import TestOperatorDirectory, TestWorkOrderCatalog
from test_stats import TestShiftTotalsTracker
from test_components import TestFrameToImage
from test_kiosk import (TestKioskScenario, TestKioskCodes, TestKioskGating, TestKioskCamera,
                        TestKioskDisplay, TestTickDriver)
from test_integration import TestIntegration, TestSystemHealth

TEST_GROUPS = {
    'config': [TestConfigManager],
    'models': [TestWorkOrder, TestSessionState, TestSessionSummary, TestRate],
    'file_handler': [TestFileHandler],
    'logger': [TestEventLogger, TestConfigureLogging],
    'session': [TestSessionTransitions, TestSessionTiming, TestSessionNotifications],
    'capture': [TestKeyboardCodeReader, TestVisualCodeCapture, TestCodeCapture, TestCameraBackends],
    'directory': [TestOperatorDirectory, TestWorkOrderCatalog],
    'stats': [TestShiftTotalsTracker],
    'components': [TestFrameToImage],
    'kiosk': [TestKioskScenario, TestKioskCodes, TestKioskGating, TestKioskCamera,
              TestKioskDisplay, TestTickDriver],
    'integration': [TestIntegration, TestSystemHealth],
}


def _suite(test_cases):
    suite = unittest.TestSuite()
    for test_case in test_cases:
        suite.addTest(unittest.defaultTestLoader.loadTestsFromTestCase(test_case))
    return suite


def run_all_tests():
    """Run every test group."""
    test_suite = _suite([case for cases in TEST_GROUPS.values() for case in cases])
    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(test_suite)


def run_specific_test(test_name):
    """Run a single test group."""
    if test_name not in TEST_GROUPS:
        print(f"Unknown test: {test_name}")
        print(f"Available tests: {', '.join(TEST_GROUPS)}")
        return None

    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(_suite(TEST_GROUPS[test_name]))


if __name__ == '__main__':
    print("=" * 50)
    print("MESAI Kiosk test run")
    print("=" * 50)

    if len(sys.argv) > 1:
        test_name = sys.argv[1]
        print(f"Running: {test_name}")
        result = run_specific_test(test_name)
    else:
        print("Running all tests")
        result = run_all_tests()

    if result:
        print("\n" + "=" * 50)
        print(f"Tests run: {result.testsRun}")
        print(f"Passed: {result.testsRun - len(result.failures) - len(result.errors)}")
        print(f"Failures: {len(result.failures)}")
        print(f"Errors: {len(result.errors)}")

        if result.failures:
            print("\nFailed tests:")
            for test, traceback in result.failures:
                print(f"- {test}")

        if result.errors:
            print("\nTests with errors:")
            for test, traceback in result.errors:
                print(f"- {test}")

        print("=" * 50)

        sys.exit(0 if result.wasSuccessful() else 1)
    sys.exit(1)
