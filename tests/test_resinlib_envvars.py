import asyncio
import unittest
from unittest.mock import AsyncMock, Mock

from resin.devices import DeviceResolver
from resin.errors import NotFoundError, TransportError, ValidationError

from resinlib.plumbing.envvars import (DeviceEnvironmentVariableService,
                                       EnvironmentVariableService, is_system_variable)

from .backend import FakeBackend


class TestSystemVariable(unittest.TestCase):

    def test_system(self):
        self.assertTrue(is_system_variable({"name": "RESIN_SUPERVISOR"}))

    def test_not_system(self):
        self.assertFalse(is_system_variable({"name": "EDITOR"}))

    def test_case_sensitive(self):
        self.assertFalse(is_system_variable({"name": "resin_supervisor"}))

    def test_prefix_only(self):
        self.assertFalse(is_system_variable({"name": "MY_RESIN_VAR"}))

    def test_application_service(self):
        service = EnvironmentVariableService(Mock())
        self.assertTrue(service.is_system_variable({"name": "RESIN_SUPERVISOR"}))
        self.assertFalse(service.is_system_variable({"name": "EDITOR"}))

    def test_device_service(self):
        service = DeviceEnvironmentVariableService(Mock(), Mock())
        self.assertTrue(service.is_system_variable({"env_var_name": "RESIN_SUPERVISOR"}))
        self.assertFalse(service.is_system_variable({"env_var_name": "EDITOR"}))

    def test_no_io(self):
        client = Mock()
        EnvironmentVariableService(client).is_system_variable({"name": "RESIN_X"})
        self.assertEqual(client.mock_calls, [])


class TestEnvironmentVariableRequests(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.client = AsyncMock()
        self.service = EnvironmentVariableService(self.client)

    async def test_get_all_by_application(self):
        self.client.get.return_value = [{"id": 1, "application": 5, "name": "A", "value": "1"}]
        variables = await self.service.get_all_by_application(5)
        self.assertEqual(variables, self.client.get.return_value)
        self.client.get.assert_awaited_once_with("environment_variable",
                                                 filter={"application": 5}, orderby="name asc")

    async def test_create(self):
        self.client.post.return_value = {"id": 9, "application": 5, "name": "EDITOR",
                                         "value": "vim"}
        var_id = await self.service.create(5, "EDITOR", "vim")
        self.assertEqual(var_id, 9)
        self.client.post.assert_awaited_once_with("environment_variable",
                                                  {"application": 5, "name": "EDITOR",
                                                   "value": "vim"})

    async def test_update(self):
        self.assertIsNone(await self.service.update(9, "emacs"))
        self.client.patch.assert_awaited_once_with("environment_variable", 9, {"value": "emacs"})

    async def test_remove(self):
        self.assertIsNone(await self.service.remove(9))
        self.client.delete.assert_awaited_once_with("environment_variable", 9)

    async def test_error_passthrough(self):
        error = TransportError("down")
        self.client.get.side_effect = error
        with self.assertRaises(TransportError) as ctx:
            await self.service.get_all_by_application(5)
        self.assertIs(ctx.exception, error)

    async def test_not_found_passthrough(self):
        error = NotFoundError("no application", status_code=404)
        self.client.post.side_effect = error
        callback = Mock()
        with self.assertRaises(NotFoundError):
            await self.service.create(404, "EDITOR", "vim", callback=callback)
        await asyncio.sleep(0)
        callback.assert_called_once_with(error)


class TestDeviceEnvironmentVariableRequests(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.client = AsyncMock()
        self.resolver = AsyncMock()
        self.resolver.get_by_name.return_value = {"id": 7, "name": "my-device"}
        self.service = DeviceEnvironmentVariableService(self.client, self.resolver)

    async def test_get_all(self):
        self.client.get.return_value = []
        await self.service.get_all("my-device")
        self.resolver.get_by_name.assert_awaited_once_with("my-device")
        self.client.get.assert_awaited_once_with("device_environment_variable",
                                                 filter={"device": 7},
                                                 orderby="env_var_name asc", expand="device")

    async def test_create(self):
        self.client.post.return_value = {"id": 3}
        self.assertEqual(await self.service.create("my-device", "EDITOR", "vim"), 3)
        self.client.post.assert_awaited_once_with("device_environment_variable",
                                                  {"device": 7, "env_var_name": "EDITOR",
                                                   "value": "vim"})

    async def test_update(self):
        await self.service.update(3, "emacs")
        self.client.patch.assert_awaited_once_with("device_environment_variable", 3,
                                                   {"value": "emacs"})
        self.resolver.get_by_name.assert_not_awaited()

    async def test_remove(self):
        await self.service.remove(3)
        self.client.delete.assert_awaited_once_with("device_environment_variable", 3)
        self.resolver.get_by_name.assert_not_awaited()

    async def test_unknown_device(self):
        error = NotFoundError("Device not found: unknown-device")
        self.resolver.get_by_name.side_effect = error
        for call in (lambda: self.service.get_all("unknown-device"),
                     lambda: self.service.create("unknown-device", "EDITOR", "vim")):
            with self.assertRaises(NotFoundError) as ctx:
                await call()
            self.assertIs(ctx.exception, error)
        self.assertEqual(self.client.mock_calls, [])

    async def test_resolution_uncached(self):
        self.client.get.return_value = []
        await asyncio.gather(self.service.get_all("my-device"), self.service.get_all("my-device"))
        await self.service.create("my-device", "EDITOR", "vim")
        self.assertEqual(self.resolver.get_by_name.await_count, 3)


class TestAgainstBackend(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.backend = FakeBackend()
        self.app = self.backend.add("application", app_name="app")["id"]
        self.other = self.backend.add("application", app_name="other")["id"]
        self.device = self.backend.add("device", name="my-device", application=self.app)["id"]
        self.service = EnvironmentVariableService(self.backend)
        self.devices = DeviceEnvironmentVariableService(self.backend, DeviceResolver(self.backend))

    async def test_filtered_and_sorted(self):
        for app, name in ((self.app, "ZED"), (self.other, "ALPHA"), (self.app, "BETA"),
                          (self.app, "RESIN_SUPERVISOR")):
            await self.service.create(app, name, "x")
        variables = await self.service.get_all_by_application(self.app)
        self.assertEqual([var["name"] for var in variables], ["BETA", "RESIN_SUPERVISOR", "ZED"])
        self.assertTrue(all(var["application"] == self.app for var in variables))

    async def test_create_then_read(self):
        await self.service.create(self.app, "EDITOR", "vim")
        variables = await self.service.get_all_by_application(self.app)
        self.assertIn(("EDITOR", "vim"), [(var["name"], var["value"]) for var in variables])

    async def test_update_value_only(self):
        var_id = await self.service.create(self.app, "EDITOR", "vim")
        await self.service.update(var_id, "emacs")
        (var,) = await self.service.get_all_by_application(self.app)
        self.assertEqual(var, {"id": var_id, "application": self.app, "name": "EDITOR",
                               "value": "emacs"})

    async def test_remove(self):
        var_id = await self.service.create(self.app, "EDITOR", "vim")
        keep_id = await self.service.create(self.app, "SHELL", "zsh")
        await self.service.remove(var_id)
        ids = [var["id"] for var in await self.service.get_all_by_application(self.app)]
        self.assertEqual(ids, [keep_id])

    async def test_remove_missing(self):
        with self.assertRaises(NotFoundError):
            await self.service.remove(12345)

    async def test_update_missing(self):
        for service in (self.service, self.devices):
            with self.subTest(resource=service.resource):
                callback = Mock()
                with self.assertRaises(NotFoundError) as ctx:
                    await service.update(12345, "emacs", callback=callback)
                await asyncio.sleep(0)
                callback.assert_called_once_with(ctx.exception)

    async def test_device_remove_missing(self):
        callback = Mock()
        with self.assertRaises(NotFoundError) as ctx:
            await self.devices.remove(12345, callback=callback)
        await asyncio.sleep(0)
        callback.assert_called_once_with(ctx.exception)
        self.assertEqual(self.backend.calls, [("delete", "device_environment_variable")])

    async def test_create_missing_application(self):
        with self.assertRaises(NotFoundError):
            await self.service.create(12345, "EDITOR", "vim")

    async def test_create_duplicate(self):
        await self.service.create(self.app, "EDITOR", "vim")
        with self.assertRaises(ValidationError):
            await self.service.create(self.app, "EDITOR", "nano")

    async def test_device_roundtrip(self):
        var_id = await self.devices.create("my-device", "EDITOR", "vim")
        await self.devices.update(var_id, "emacs")
        (var,) = await self.devices.get_all("my-device")
        self.assertEqual(var["env_var_name"], "EDITOR")
        self.assertEqual(var["value"], "emacs")
        self.assertEqual(var["device"][0]["name"], "my-device")
        await self.devices.remove(var_id)
        self.assertEqual(await self.devices.get_all("my-device"), [])

    async def test_device_scopes_separate(self):
        await self.service.create(self.app, "EDITOR", "vim")
        await self.devices.create("my-device", "EDITOR", "nano")
        (app_var,) = await self.service.get_all_by_application(self.app)
        (dev_var,) = await self.devices.get_all("my-device")
        self.assertEqual(app_var["value"], "vim")
        self.assertEqual(dev_var["value"], "nano")

    async def test_unknown_device_no_variable_calls(self):
        with self.assertRaises(NotFoundError):
            await self.devices.get_all("unknown-device")
        self.assertEqual(self.backend.calls, [("get", "device")])
        self.assertEqual(self.backend.calls_to("device_environment_variable"), [])

    async def test_callback_matches_future(self):
        await self.service.create(self.app, "EDITOR", "vim")
        for call in (lambda **kw: self.service.get_all_by_application(self.app, **kw),
                     lambda **kw: self.devices.get_all("unknown-device", **kw)):
            try:
                awaited = (None, await call())
            except NotFoundError as ex:
                awaited = (type(ex), str(ex))
            done = asyncio.Event()
            results = []

            def callback(err, value=None):
                results.append((type(err), str(err)) if err else (None, value))
                done.set()

            call(callback=callback)
            await asyncio.wait_for(done.wait(), 1)
            self.assertEqual(results, [awaited])


if __name__ == "__main__":
    unittest.main()
