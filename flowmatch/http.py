"""Simple API for async web server.
"""

import asyncio
import functools
import json
import re

import aiohttp.web as web

from .endpoint import parse_endpoint, format_endpoint

_VAR_REGEX = re.compile(r'^\{(\w+)\}$')
_LOG_FORMAT = '%a "%r" %s %b "%{Referrer}i" "%{User-Agent}i"'

to_json = functools.partial(
    json.dumps, ensure_ascii=False, separators=(',', ':'))


class HttpServer:
    """Simple async web server.

    Usage:

        web = HttpServer()

        @web.get('/foo')
        async def get_foo():
            return 'foo'

        @web.get('/foo/{arg}/foo.json', 'json')
        async def get_foo_json(arg):
            return { 'foo': arg }

        await web.start('127.0.0.1:8080')
        ...
        await web.stop()

    Handlers may return a 2-tuple (result, status) to set the HTTP status.
    """

    def __init__(self, *, logger=None):
        self.endpoint = None
        self.logger = logger
        self.web_app = web.Application()
        self.web_runner = None

    async def start(self, endpoint):
        """Start web server listening on endpoint.

        Args:
            endpoint (str): Listening endpoint "address:port".
        """
        assert self.web_runner is None
        self.endpoint = parse_endpoint(endpoint)
        kwds = {'access_log_format': _LOG_FORMAT}
        if self.logger:
            kwds['access_log'] = self.logger
        self.web_runner = web.AppRunner(self.web_app, **kwds)
        await self.web_runner.setup()

        host, port = self.endpoint
        site = web.TCPSite(self.web_runner, host or None, port)
        await site.start()

        if self.logger:
            self.logger.info('HttpServer: Start listening on %s',
                             format_endpoint(self.endpoint))

    async def stop(self):
        """Stop web server."""
        if self.web_runner is None:
            return
        await self.web_runner.cleanup()
        self.web_runner = None

        if self.logger:
            self.logger.info('HttpServer: Stop listening on %s',
                             format_endpoint(self.endpoint))

    def get(self, path, payload_type='text'):
        """Decorator for routing HTTP GET requests."""
        route_path, route_vars = _split_route(path)
        route_get = _ROUTE_GET[payload_type]

        def _wrap(func):
            assert func is not None
            get = route_get(route_vars, func)
            self.web_app.router.add_get(route_path, get)
            return func

        return _wrap

    def post(self, path, payload_type):
        """Decorator for routing HTTP POST requests."""
        route_path, route_vars = _split_route(path)
        route_post = _ROUTE_POST[payload_type]

        def _wrap(func):
            assert func is not None
            post = route_post(route_vars, func)
            self.web_app.router.add_post(route_path, post)
            return func

        return _wrap


def _split_route(path):
    """Split path on '?' into route_path and route_vars.

    For example, given "/path/{foo}?{bar}", return ('/path/{foo}', ['bar'])
    """
    if '?' not in path:
        return path, []
    route_path, rest = path.split('?', maxsplit=1)
    route_vars = []
    for name in rest.split('&'):
        m = _VAR_REGEX.match(name)
        if not m:
            raise ValueError("Invalid variable name: %s" % name)
        route_vars.append(m.group(1))
    return route_path, route_vars


def _route_get_json(route_vars, func):
    async def _get(request):
        kwds = _build_kwds(request, route_vars)
        return await _respond_json(func, kwds)

    return _get


def _route_get_text(route_vars, func):
    async def _get(request):
        kwds = _build_kwds(request, route_vars)
        return await _respond_text(func, kwds)

    return _get


def _route_post_json(route_vars, func):
    async def _post(request):
        try:
            post_data = await request.json()
        except ValueError:
            raise web.HTTPBadRequest(text='Invalid JSON') from None
        kwds = _build_kwds(request, route_vars, post_data)
        return await _respond_json(func, kwds)

    return _post


_ROUTE_GET = {'json': _route_get_json, 'text': _route_get_text}

_ROUTE_POST = {'json': _route_post_json}


def _build_kwds(request, route_vars, post_data=None):
    kwds = dict(request.match_info)
    for var in route_vars:
        kwds[var] = request.query.get(var)
    if post_data is not None:
        kwds['post_data'] = post_data
    return kwds


async def _call(func, kwds):
    if asyncio.iscoroutinefunction(func):
        result = await func(**kwds)
    else:
        result = func(**kwds)
    # If result is a 2-tuple, treat it as (result, status)
    if isinstance(result, tuple):
        assert len(result) == 2
        return result
    return result, 200


async def _respond_json(func, kwds):
    result, status = await _call(func, kwds)
    return web.json_response(result, status=status, dumps=to_json)


async def _respond_text(func, kwds):
    result, status = await _call(func, kwds)
    if isinstance(result, bytes):
        return web.Response(
            body=result, status=status, content_type='text/plain')
    return web.Response(text=result, status=status)
