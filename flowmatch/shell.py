"""Interactive shell for encoding match expressions."""

import logging
import shlex

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from flowmatch import metrics
from flowmatch.exception import MatchError
from flowmatch.expr import FACTORIES, encode_expr, parse_expr

LOGGER = logging.getLogger(__package__)

PROMPT = 'match> '

_BOLD_STYLE = Style.from_dict({'': 'bold'})

_QUIT_COMMANDS = {'quit', 'exit'}


def run_shell(*, session=None, out=None):
    """Read match expressions until EOF and print their tokens."""
    if session is None:
        session = PromptSession(
            history=InMemoryHistory(),
            completer=WordCompleter(_command_words()),
            style=_BOLD_STYLE,
            complete_while_typing=False)
    while True:
        try:
            line = session.prompt(PROMPT)
        except KeyboardInterrupt:
            continue
        except EOFError:
            break
        if line.strip() in _QUIT_COMMANDS:
            break
        run_command(line, out=out)


def run_command(line, *, out=None):
    """Execute one shell command line.

    Commands:
        help                list factory names
        describe EXPR       print reconstruction string
        EXPR                print encoded tokens, one per line
    """
    line = line.strip()
    if not line:
        return
    cmd, _, rest = line.partition(' ')
    try:
        if cmd == 'help':
            for name in sorted(FACTORIES):
                print(name, file=out)
        elif cmd == 'describe':
            print(repr(parse_expr(rest)), file=out)
        else:
            tokens = encode_expr(line)
            metrics.record_success('shell', tokens)
            for token in tokens:
                print(token, file=out)
    except MatchError as ex:
        LOGGER.debug('shell command %s failed: %s', shlex.quote(line), ex)
        metrics.record_error('shell', ex)
        print('error: %s' % ex, file=out)


def _command_words():
    return ['help', 'describe', 'quit'] + sorted(FACTORIES)
