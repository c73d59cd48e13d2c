"""
Helpers for converting methods into scripts, and filling in arguments from the command line.
"""

import asyncio
from functools import wraps
from inspect import cleandoc, isawaitable, Parameter, signature
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, Union

from docopt import docopt

from resin.errors import ResinError

from ..sdk import SDK


DocOptArgs = Dict[str, Union[bool, str, List[str]]]


ENTRYPOINTS: List[str] = []


def entrypoint(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to make an entrypoint out of a generic function or coroutine function.

    This uses `docopt` to parse arguments according to the method docstring, and will be formatted
    with `{script}` set to the script name.  At minimum, it should contain `Usage: {script}`.

    Functions may optionally accept arguments, but they must be annotated with a recognised type in
    order to be filled in.  The following types are fixed and always available:

    - `DocOptArgs` (a `dict` of input parameters parsed from the usage line)
    - `SDK` (built from the user's settings, or the `--config` file if given)

    Parameters annotated `str` or `int` are filled from an input parameter matching the variable
    name (the name must be declared in the usage line, either in upper case or surrounded by arrow
    brackets, e.g. `NAME` or `<name>`).

    Coroutine functions are run to completion in a new event loop.  Any `ResinError` is printed and
    exits with status 1.  An example function:

        @entrypoint
        async def rename(opts: DocOptArgs, sdk: SDK, var_id: int, value: str):
            \"""
            Change the value of a variable.

            Usage: {script} VAR_ID VALUE
            \"""
    """
    label = "resinlib-{}-{}".format(fn.__module__.rsplit(".", 1)[-1],
                                    fn.__qualname__).replace("_", "-")

    @wraps(fn)
    def wrap(opts: Optional[DocOptArgs] = None, sdk: Optional[SDK] = None):
        extra: Dict[str, Any] = {}
        script = "{} [--debug] [--config=PATH]".format(label)
        if opts is None:
            doc = cleandoc(fn.__doc__.format(script=script))
            opts = docopt(doc)
        if opts.pop("--debug", False):
            logging.basicConfig(level=logging.DEBUG)
        config = opts.pop("--config", None)
        # Detect resolvable-typed arguments and fill in their values.
        sig = signature(fn)
        ok = True
        for param in sig.parameters.values():
            name = param.name
            cls = param.annotation
            if cls is DocOptArgs:
                extra[name] = opts
                continue
            elif cls is SDK:
                extra[name] = sdk = sdk or SDK.from_settings(config)
                continue
            try:
                try:
                    value = opts[name.upper()]
                except KeyError:
                    value = opts["<{}>".format(name)]
            except KeyError:
                raise RuntimeError("Missing argument {!r}".format(name))
            if cls in (str, Parameter.empty):
                extra[name] = value
            elif cls is int:
                try:
                    extra[name] = int(value)
                except (TypeError, ValueError):
                    ok = False
                    error("{!r} is not valid for parameter {!r}".format(value, name), colour="1")
            else:
                raise RuntimeError("Bad parameter {!r} type {!r}".format(name, cls))
        if not ok:
            sys.exit(1)
        try:
            result = fn(**extra)
            if isawaitable(result):
                result = asyncio.run(result)
        except ResinError as ex:
            error(str(ex), exit=1)
        return result
    wrap.__doc__ = wrap.__doc__.format(script=label)
    # Create a console script line for setup.
    target = "{}:{}".format(fn.__module__, fn.__qualname__)
    ENTRYPOINTS.append("{}={}".format(label, target))
    return wrap


def confirm(msg: str = "Are you sure?"):
    """
    Prompt for confirmation before destructive actions.
    """
    try:
        yn = input("\033[96m{} [yN]\033[0m ".format(msg))
    except (KeyboardInterrupt, EOFError):
        print()
        yn = "n"
    if yn.lower() not in ("y", "yes"):
        error("Aborted!", exit=1)


def error(msg: Optional[str] = None, *, exit: Optional[int] = None, colour: Optional[str] = None):
    """
    Print an error message and/or exit.
    """
    if msg:
        colour = colour or ("1" if exit else "3")
        print("\033[9{}m{}\033[0m".format(colour, msg), file=sys.stderr)
    if exit is not None:
        sys.exit(exit)
