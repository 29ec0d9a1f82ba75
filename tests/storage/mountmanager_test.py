# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import os

import pytest

from vmstorage.storage import exception as se
from vmstorage.storage import fileUtils
from vmstorage.storage import mountManager
from vmstorage.storage import mountRegistry

from fakestorage import FakeConnections, gluster_domain, nfs_domain


@pytest.fixture
def mount_root(tmpdir):
    return str(tmpdir.join("vm-id"))


@pytest.fixture
def registry(mount_root):
    return mountRegistry.MountRegistry(mount_root)


def register(registry, *sd_ids):
    for sd_id in sd_ids:
        registry.register(nfs_domain(sd_id))


class TestEstablishAll:

    def test_empty_registry(self, registry, mount_root):
        connections = FakeConnections()
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)

        assert manager.establish_all() is False
        assert not manager.mounted
        assert manager.state == mountManager.IDLE
        assert connections.connected == []
        assert not os.path.exists(mount_root)

    def test_mount_all(self, registry, mount_root, proc_mounts):
        register(registry, "sdA", "sdB")
        registry.register(gluster_domain("sdG"))
        connections = FakeConnections()
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections, vm_id="vm-id")

        assert manager.establish_all() is True

        assert manager.mounted
        assert manager.state == mountManager.MOUNTED
        assert connections.connected == ["sdA", "sdB", "sdG"]
        assert connections.types == ["nfs", "nfs", "glusterfs"]
        assert os.path.isdir(mount_root)
        for desc in registry.all():
            assert os.path.isdir(desc.mount_point)

    def test_existing_mount_root(self, registry, mount_root, proc_mounts):
        os.makedirs(mount_root)
        register(registry, "sdA")
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=FakeConnections())

        manager.establish_all()

        assert manager.mounted

    def test_rollback(self, registry, mount_root):
        register(registry, "sd1", "sd2", "sd3", "sd4", "sd5")
        mount_points = [d.mount_point for d in registry.all()]
        connections = FakeConnections(fail_connect=["sd3"])
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)

        with pytest.raises(se.MountError) as e:
            manager.establish_all()

        assert e.value.context["reason"] == "Fake mount failure"
        assert connections.connected == ["sd1", "sd2"]
        assert mount_points[0] in connections.disconnected
        assert mount_points[1] in connections.disconnected
        assert not manager.mounted
        assert manager.state == mountManager.UNMOUNTED
        assert not os.path.exists(mount_root)
        assert registry.is_empty()

    def test_rollback_first_mount(self, registry, mount_root):
        register(registry, "sd1", "sd2")
        connections = FakeConnections(fail_connect=["sd1"])
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)

        with pytest.raises(se.MountError):
            manager.establish_all()

        assert connections.connected == []
        assert not manager.mounted
        assert not os.path.exists(mount_root)

    def test_rollback_keeps_original_error(self, registry, mount_root):
        register(registry, "sd1", "sd2")
        mount_points = [d.mount_point for d in registry.all()]
        # Rolling back fails too, but the caller sees the mount error.
        connections = FakeConnections(fail_connect=["sd2"],
                                      fail_disconnect=mount_points)
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)

        with pytest.raises(se.MountError) as e:
            manager.establish_all()

        assert not isinstance(e.value, se.UnmountError)
        assert connections.disconnected == mount_points
        assert not manager.mounted

    def test_mount_root_error(self, registry, tmpdir):
        # The mount root cannot be created under a file.
        tmpdir.join("file").write("")
        registry = mountRegistry.MountRegistry(str(tmpdir.join("file", "vm")))
        register(registry, "sd1")
        connections = FakeConnections()
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)

        with pytest.raises(OSError):
            manager.establish_all()

        assert connections.connected == []
        assert manager.state == mountManager.UNMOUNTED


class TestTeardownAll:

    def test_empty_registry(self, registry, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("Unexpected file system access")

        monkeypatch.setattr(fileUtils, "cleanupdir", fail)
        monkeypatch.setattr(fileUtils, "createdir", fail)
        connections = FakeConnections()
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)

        manager.teardown_all()

        assert connections.disconnected == []
        assert manager.state == mountManager.IDLE

    def test_unmount_all(self, registry, mount_root, proc_mounts):
        register(registry, "sdA", "sdB")
        mount_points = [d.mount_point for d in registry.all()]
        connections = FakeConnections()
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)
        manager.establish_all()

        manager.teardown_all()

        assert connections.disconnected == mount_points
        assert not manager.mounted
        assert manager.state == mountManager.UNMOUNTED
        assert not os.path.exists(mount_root)
        assert registry.is_empty()

    def test_continue_after_failure(self, registry, mount_root, proc_mounts):
        register(registry, "sdA", "sdB", "sdC")
        mount_points = [d.mount_point for d in registry.all()]
        connections = FakeConnections(fail_disconnect=[mount_points[0]])
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)
        manager.establish_all()

        manager.teardown_all()

        assert connections.disconnected == mount_points
        assert not manager.mounted

    def test_cleanup_failure(self, registry, mount_root, proc_mounts,
                             monkeypatch):
        def fail(path, ignoreErrors=True):
            raise OSError("Fake cleanup failure")

        monkeypatch.setattr(fileUtils, "cleanupdir", fail)
        register(registry, "sdA")
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=FakeConnections())
        manager.establish_all()

        manager.teardown_all()

        assert not manager.mounted
        assert registry.is_empty()

    def test_twice(self, registry, mount_root, proc_mounts):
        register(registry, "sdA")
        connections = FakeConnections()
        manager = mountManager.MountLifecycleManager(
            registry, connection_class=connections)
        manager.establish_all()

        manager.teardown_all()
        manager.teardown_all()

        assert len(connections.disconnected) == 1
