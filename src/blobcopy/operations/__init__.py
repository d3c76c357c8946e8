"""
Operations package - Application service layer between CLI and the copy-verify core.

This package provides the Operations facade that orchestrates CLI commands,
centralizes error mapping, and handles output formatting while keeping
CLI commands thin and testable.
"""
from .facade import Operations, OpsConfig, copy_blob
from .mappers import exit_code_for, exit_code_for_outcome, run_and_exit

__all__ = ["Operations", "OpsConfig", "copy_blob", "exit_code_for", "exit_code_for_outcome", "run_and_exit"]
