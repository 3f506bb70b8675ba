import asyncio
import signal
import sys

from flowmatch import metrics
from flowmatch.args import parse_args
from flowmatch.exception import MatchError
from flowmatch.expr import encode_expr
from flowmatch.log import logger
from flowmatch.logging import init_logging


def main(argv=None):
    """Run flowmatch command line tool and return exit status."""
    config = parse_args(argv)
    init_logging(config.loglevel, config.logfile)

    if config.http_endpoint:
        return asyncio.run(run_service(config.http_endpoint))
    if config.shell:
        from flowmatch.shell import run_shell
        run_shell()
        return 0
    return encode_all(config.exprs)


def encode_all(exprs, *, out=None, err=None):
    """Print tokens for each expression; return 1 if any fails."""
    if err is None:
        err = sys.stderr
    status = 0
    for expr in exprs:
        try:
            tokens = encode_expr(expr)
        except MatchError as ex:
            metrics.record_error('cli', ex)
            print('%s: %s' % (expr, ex), file=err)
            status = 1
            continue
        metrics.record_success('cli', tokens)
        for token in tokens:
            print(token, file=out)
    return status


async def run_service(endpoint):
    """Run HTTP service until SIGINT or SIGTERM."""
    from flowmatch.service import MatchService
    service = MatchService()
    await service.start(endpoint)

    done = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, done.set)
    try:
        await done.wait()
    finally:
        logger.info('Shutting down')
        await service.stop()
    return 0


if __name__ == '__main__':
    sys.exit(main())
