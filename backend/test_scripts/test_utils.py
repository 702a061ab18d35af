"""
Expense Tracker Test Utilities Library

Common utilities for all test scripts to avoid code duplication.
Provides standardized output formatting and test data helpers.
"""
import time


# ============================================================================
# ANSI COLOR CODES
# ============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    RED = '\033[0;31m'
    BLUE = '\033[0;34m'
    NC = '\033[0m'  # No Color


# ============================================================================
# OUTPUT FORMATTING FUNCTIONS
# ============================================================================

def print_section(title: str):
    """Print a formatted section header."""
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print('=' * 60)


def print_success(message: str):
    """Print a success message with green checkmark."""
    print(f"{Colors.GREEN}✅ {message}{Colors.NC}")


def print_info(message: str):
    """Print an info message with blue info symbol."""
    print(f"{Colors.BLUE}ℹ️  {message}{Colors.NC}")


# ============================================================================
# RECORDS HELPER
# ============================================================================

# Helper to generate unique identifiers
_counter = 0


def unique_id(prefix: str = "TEST") -> str:
    """Generate unique identifier for test data."""
    global _counter
    _counter += 1
    return f"{prefix}_{int(time.time() * 1000)}_{_counter}"
