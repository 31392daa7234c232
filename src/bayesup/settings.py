"""
Model Settings Registry.

Any component can attach an arbitrarily-shaped configuration group to a model
without the model knowing its shape. Each group is stored under a name on the
model's `settings` mapping, together with the operations used to copy and
release it.

Groups that subclass SettingsGroup supply those operations themselves and are
attached with model_add_group(). Raw groups are attached with
settings_add_group() and explicit copy/release callables:

    copy_fn=None     -> copying between models aliases the same group
    release_fn=None  -> the entry does not own the group (e.g. borrowed data)

To add a new settings group:
1. Subclass SettingsGroup and set `settings_name`
2. Implement copy() (and release() if it owns resources)
3. Attach with model_add_group(model, MyGroup(...))
4. Read back with settings_get_group(model, MyGroup.settings_name)
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .error_handling import SettingsNotFoundError


# Longest allowed group name; longer names are truncated on attach
MAX_NAME_LENGTH = 100


class SettingsGroup:
    """
    Interface for configuration capsules attached to models.

    Subclasses set `settings_name` and override copy() to return an
    independent group. release() drops any resources the group owns.
    """
    settings_name = ""

    def copy(self) -> 'SettingsGroup':
        raise NotImplementedError

    def release(self) -> None:
        pass


@dataclass
class SettingsEntry:
    """One named group attached to a model."""
    name: str
    group: Any
    copy_fn: Optional[Callable[[Any], Any]] = None
    release_fn: Optional[Callable[[Any], None]] = None


def _settings_of(model) -> dict:
    settings = getattr(model, 'settings', None)
    if settings is None:
        settings = {}
        model.settings = settings
    return settings


def settings_add_group(model, name: str, group, copy_fn=None, release_fn=None):
    """
    Attach a settings group to a model.

    If a group with the same name is already attached, it is released and the
    new group is stored in its place, keeping the order of the list.

    Args:
        model: Any object with a `settings` mapping (normally a Model)
        name: Group name (truncated to MAX_NAME_LENGTH characters)
        group: The configuration object
        copy_fn: fn(group) -> new group, or None to alias on copy
        release_fn: fn(group) -> None, or None if the entry does not own the group

    Returns:
        The attached group
    """
    name = name[:MAX_NAME_LENGTH]
    settings = _settings_of(model)
    old = settings.get(name)
    if old is not None and old.release_fn is not None:
        old.release_fn(old.group)
    settings[name] = SettingsEntry(name=name, group=group, copy_fn=copy_fn, release_fn=release_fn)
    return group


def model_add_group(model, group: SettingsGroup):
    """Attach a SettingsGroup under its own name with its own copy/release."""
    return settings_add_group(model, group.settings_name, group,
                              copy_fn=type(group).copy, release_fn=type(group).release)


def settings_get_group(model, name: str):
    """
    Get the group attached under `name`, or None if absent.

    A model with no settings at all behaves like a model without the group.
    The empty name never matches a group and also returns None.
    """
    settings = getattr(model, 'settings', None)
    if not settings:
        return None
    entry = settings.get(name[:MAX_NAME_LENGTH])
    return None if entry is None else entry.group


def settings_rm_group(model, name: str) -> None:
    """
    Release and remove the named group. Order of the remaining groups is kept.

    Does nothing if the model has no settings or the group is absent.
    """
    settings = getattr(model, 'settings', None)
    if not settings:
        return
    entry = settings.pop(name[:MAX_NAME_LENGTH], None)
    if entry is not None and entry.release_fn is not None:
        entry.release_fn(entry.group)


def settings_copy_group(dst_model, src_model, name: str):
    """
    Copy the named group from src_model to dst_model (memcpy argument order).

    The group's copy function produces the new group; without one the group is
    shared by alias. The copy keeps the source's copy/release functions.
    The empty name copies every group of the source.

    Raises:
        SettingsNotFoundError: If src_model has no settings, or the group is absent
    """
    settings = getattr(src_model, 'settings', None)
    if not settings:
        raise SettingsNotFoundError(name, "the input model has no settings")
    if not name:
        for entry_name in list(settings):
            settings_copy_group(dst_model, src_model, entry_name)
        return None
    entry = settings.get(name[:MAX_NAME_LENGTH])
    if entry is None:
        raise SettingsNotFoundError(name, "not found in the input model")
    new_group = entry.copy_fn(entry.group) if entry.copy_fn is not None else entry.group
    return settings_add_group(dst_model, entry.name, new_group,
                              copy_fn=entry.copy_fn, release_fn=entry.release_fn)


def settings_free_all(model) -> None:
    """Release every group attached to a model, most recent first."""
    settings = getattr(model, 'settings', None)
    if not settings:
        return
    for name in reversed(list(settings)):
        settings_rm_group(model, name)
