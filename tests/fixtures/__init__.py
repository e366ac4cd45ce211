"""Test fixtures for llvmconfigkit tests.

- llvm_config: fake llvm-config runners and executables

Import fixtures in your tests using:
    from tests.fixtures.llvm_config import FakeRunner, LLVM_18_OUTPUTS
"""

__all__ = [
    "llvm_config",
]
