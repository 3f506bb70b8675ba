"""Prometheus counters for encoded match tokens."""

from prometheus_client import REGISTRY, Counter, generate_latest

EXPRESSIONS = Counter(
    'flowmatch_expressions_total',
    'Match expressions encoded successfully',
    ['source'])

TOKENS = Counter(
    'flowmatch_tokens_total',
    'Match tokens produced',
    ['source'])

ERRORS = Counter(
    'flowmatch_errors_total',
    'Match expressions rejected',
    ['source', 'kind'])


def record_success(source, tokens):
    """Count one encoded expression and its tokens."""
    EXPRESSIONS.labels(source).inc()
    TOKENS.labels(source).inc(len(tokens))


def record_error(source, exc):
    """Count one rejected expression by error kind."""
    ERRORS.labels(source, exc.kind).inc()


def exposition():
    """Return metrics in prometheus text format."""
    return generate_latest(REGISTRY)
