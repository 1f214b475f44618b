from gqlcheck.checker.engine import check_call_site, check_source, error_to_diagnostic, fix_source

__all__ = ["check_call_site", "check_source", "error_to_diagnostic", "fix_source"]
