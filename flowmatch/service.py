"""HTTP service that encodes match expressions."""

import logging

from flowmatch import metrics
from flowmatch.exception import MatchError
from flowmatch.expr import encode_expr
from flowmatch.http import HttpServer

LOGGER = logging.getLogger(__package__)


class MatchService:
    """Web service exposing the match encoder.

    Routes:
        GET  /match?{expr}   encode one expression
        POST /match          encode {"expr": ...} or {"exprs": [...]}
        GET  /metrics        prometheus counters
    """

    def __init__(self, *, logger=LOGGER):
        self.logger = logger
        self.web = HttpServer(logger=logger)
        self.web.get('/match?{expr}', 'json')(self.get_match)
        self.web.post('/match', 'json')(self.post_match)
        self.web.get('/metrics', 'text')(self.get_metrics)

    async def start(self, endpoint):
        """Start service."""
        await self.web.start(endpoint)

    async def stop(self):
        """Stop service."""
        await self.web.stop()

    def get_match(self, expr):
        """Web handler for GET `/match?expr=...`."""
        if not expr:
            return _error_reply('missing "expr" parameter', 'ExpressionError')
        return self._encode([expr])

    def post_match(self, post_data):
        """Web handler for POST `/match`."""
        if not isinstance(post_data, dict):
            return _error_reply('request body must be a JSON object',
                                'ExpressionError')
        if 'exprs' in post_data:
            exprs = post_data['exprs']
        elif 'expr' in post_data:
            exprs = [post_data['expr']]
        else:
            return _error_reply('missing "expr" or "exprs"', 'ExpressionError')
        if not isinstance(exprs, list) or not all(
                isinstance(expr, str) for expr in exprs):
            return _error_reply('expressions must be strings',
                                'ExpressionError')
        return self._encode(exprs)

    @staticmethod
    def get_metrics():
        """Web handler for GET `/metrics`."""
        return metrics.exposition()

    def _encode(self, exprs):
        tokens = []
        for expr in exprs:
            try:
                result = encode_expr(expr)
            except MatchError as ex:
                self.logger.warning('Rejected %r: %s', expr, ex)
                metrics.record_error('http', ex)
                return _error_reply(str(ex), ex.kind)
            metrics.record_success('http', result)
            tokens.extend(result)
        return {'tokens': tokens}


def _error_reply(message, kind):
    return {'error': message, 'kind': kind}, 400
