"""
Scripts to manage application and device environment variables.
"""

from typing import Union

from .utils import confirm, DocOptArgs, entrypoint, error
from ..plumbing.envvars import DeviceEnvironmentVariableService, EnvironmentVariableService
from ..sdk import SDK


Service = Union[EnvironmentVariableService, DeviceEnvironmentVariableService]


def _service(opts: DocOptArgs, sdk: SDK) -> Service:
    if opts["--device"]:
        return sdk.device_environment_variables
    else:
        return sdk.environment_variables


def _application_id(target: str) -> int:
    try:
        return int(target)
    except ValueError:
        error("Application id must be numeric: {!r}".format(target), exit=1)
        raise


@entrypoint
async def show(opts: DocOptArgs, sdk: SDK, target: str):
    """
    List environment variables of an application or device.

    Usage: {script} [--device] [--system] TARGET

    TARGET is an application id, or a device name with --device.  System variables are hidden
    unless --system is given.
    """
    service = _service(opts, sdk)
    if isinstance(service, DeviceEnvironmentVariableService):
        variables = await service.get_all(target)
    else:
        variables = await service.get_all_by_application(_application_id(target))
    for var in variables:
        if service.is_system_variable(var) and not opts["--system"]:
            continue
        print("{}\t{}={}".format(var["id"], var[service.name_field], var["value"]))


@entrypoint
async def add(opts: DocOptArgs, sdk: SDK, target: str, name: str, value: str):
    """
    Create an environment variable for an application or device.

    Usage: {script} [--device] TARGET NAME VALUE

    TARGET is an application id, or a device name with --device.
    """
    service = _service(opts, sdk)
    if isinstance(service, DeviceEnvironmentVariableService):
        var_id = await service.create(target, name, value)
    else:
        var_id = await service.create(_application_id(target), name, value)
    print("Created variable {}".format(var_id))


@entrypoint
async def update(opts: DocOptArgs, sdk: SDK, var_id: int, value: str):
    """
    Change the value of an environment variable.

    Usage: {script} [--device] VAR_ID VALUE
    """
    await _service(opts, sdk).update(var_id, value)
    print("Updated variable {}".format(var_id))


@entrypoint
async def remove(opts: DocOptArgs, sdk: SDK, var_id: int):
    """
    Delete an environment variable.

    Usage: {script} [--device] [--yes] VAR_ID
    """
    if not opts["--yes"]:
        confirm("Remove variable {}?".format(var_id))
    await _service(opts, sdk).remove(var_id)
    print("Removed variable {}".format(var_id))
