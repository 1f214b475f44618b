import traceback

from gqlcheck import log
from gqlcheck.annotation.reconciler import ReconcileOptions, Replace, reconcile
from gqlcheck.config import GqlCheckConfig
from gqlcheck.errors import (
    DiagnosticKind,
    GqlCheckError,
    InterpolationNotAllowedError,
    QueryInvalidError,
    QueryParseError,
    render_message,
)
from gqlcheck.inference.engine import infer_types
from gqlcheck.models import CallSite, Diagnostic, Edit, TextRange
from gqlcheck.query.validator import parse_and_validate
from gqlcheck.schema.loader import SchemaCache, load_schema
from gqlcheck.source.edits import apply_edits
from gqlcheck.source.locator import locate_call_sites


def error_range(error: GqlCheckError, call_site: CallSite) -> TextRange:
    """Range a diagnostic for the error points at."""
    if isinstance(error, InterpolationNotAllowedError):
        start = call_site.query_range.start + error.offset
        return TextRange(start, start + error.length)
    if isinstance(error, QueryParseError):
        return call_site.query_range
    return call_site.target.identifier_range


def error_to_diagnostic(error: GqlCheckError, call_site: CallSite) -> Diagnostic:
    return Diagnostic(
        kind=error.kind,
        message=error.diagnostic_message,
        range=error_range(error, call_site),
        reason=error.reason if isinstance(error, QueryInvalidError) else None,
    )


def _run(call_site: CallSite, cache: SchemaCache | None, options: ReconcileOptions) -> Diagnostic | None:
    schema = cache.get(call_site.schema_path) if cache is not None else load_schema(call_site.schema_path)
    if call_site.interpolations:
        placeholder = call_site.interpolations[0]
        offset = placeholder.start - call_site.query_range.start
        raise InterpolationNotAllowedError(offset, placeholder.end - placeholder.start)
    document = parse_and_validate(schema, call_site.query_text, detect_interpolation=call_site.interpolations is None)
    inferred = infer_types(schema, document)

    outcome = reconcile(
        call_site.target.annotation_text,
        inferred.result_type,
        inferred.arguments_type,
        call_site.target,
        options=options,
    )
    if not isinstance(outcome, Replace):
        return None
    return Diagnostic(
        kind=outcome.kind,
        message=render_message(outcome.kind),
        range=call_site.target.identifier_range,
        edit=Edit(range=outcome.range, text=outcome.new_text),
    )


def check_call_site(
    call_site: CallSite,
    *,
    cache: SchemaCache | None = None,
    options: ReconcileOptions = ReconcileOptions(),
) -> Diagnostic | None:
    """
    Check one call site's annotation against the type inferred from its query.

    Every failure is reported as a diagnostic: user errors with their own kind and
    anything unexpected as UNHANDLED_ENGINE_EXCEPTION with the traceback.

    Args:
        call_site: The query literal and where its annotation lives
        cache: Optional schema cache shared between call sites
        options: Rendering and formatting options

    Returns:
        A diagnostic, or None when the annotation is up to date
    """
    try:
        return _run(call_site, cache, options)
    except GqlCheckError as e:
        log.debug(f"Call site '{call_site.target.identifier}' failed: {e.kind.value}")
        return error_to_diagnostic(e, call_site)
    except Exception as e:
        log.debug(f"Unhandled exception while checking '{call_site.target.identifier}': {e!r}")
        return Diagnostic(
            kind=DiagnosticKind.UNHANDLED_ENGINE_EXCEPTION,
            message=render_message(
                DiagnosticKind.UNHANDLED_ENGINE_EXCEPTION,
                error_message=f"{e}\n\n{traceback.format_exc()}",
            ),
            range=call_site.target.identifier_range,
        )


def check_source(
    source: str,
    config: GqlCheckConfig,
    *,
    cache: SchemaCache | None = None,
    tsx: bool = False,
) -> list[Diagnostic]:
    """Check every configured call site of a source, in source order."""
    cache = cache if cache is not None else SchemaCache()
    diagnostics: list[Diagnostic] = []
    for located in locate_call_sites(source, config, tsx=tsx):
        diagnostic = check_call_site(
            located.call_site,
            cache=cache,
            options=config.reconcile_options(located.target_config),
        )
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    return diagnostics


def fix_source(
    source: str,
    config: GqlCheckConfig,
    *,
    cache: SchemaCache | None = None,
    tsx: bool = False,
) -> str:
    """Return the source with every annotation fix applied."""
    diagnostics = check_source(source, config, cache=cache, tsx=tsx)
    edits = [diagnostic.edit for diagnostic in diagnostics if diagnostic.edit is not None]
    log.debug(f"Applying {len(edits)} annotation fixes")
    return apply_edits(source, edits)
