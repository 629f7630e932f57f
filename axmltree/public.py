"""
Name lookup for framework attributes (`android.R.attr`).

Binary XML produced by some packers drops the attribute names from the
string pool and leaves only the resource ids in the resource map. The
names can be recovered from the framework's public symbol table, either
the small built-in table below or a full `res/values/public.xml` from the
Android SDK.
"""

from pathlib import Path
from typing import Union

from loguru import logger
from lxml import etree

# Package id of the android framework
FRAMEWORK_PACKAGE_ID = 0x01

# A subset of frameworks/base/core/res/res/values/public.xml, type="attr"
SYSTEM_ATTRIBUTES = {
    "theme": 0x01010000,
    "label": 0x01010001,
    "icon": 0x01010002,
    "name": 0x01010003,
    "manageSpaceActivity": 0x01010004,
    "allowClearUserData": 0x01010005,
    "permission": 0x01010006,
    "readPermission": 0x01010007,
    "writePermission": 0x01010008,
    "protectionLevel": 0x01010009,
    "permissionGroup": 0x0101000a,
    "sharedUserId": 0x0101000b,
    "hasCode": 0x0101000c,
    "persistent": 0x0101000d,
    "enabled": 0x0101000e,
    "debuggable": 0x0101000f,
    "exported": 0x01010010,
    "process": 0x01010011,
    "taskAffinity": 0x01010012,
    "multiprocess": 0x01010013,
    "finishOnTaskLaunch": 0x01010014,
    "clearTaskOnLaunch": 0x01010015,
    "stateNotNeeded": 0x01010016,
    "excludeFromRecents": 0x01010017,
    "authorities": 0x01010018,
    "syncable": 0x01010019,
    "initOrder": 0x0101001a,
    "grantUriPermissions": 0x0101001b,
    "priority": 0x0101001c,
    "launchMode": 0x0101001d,
    "screenOrientation": 0x0101001e,
    "configChanges": 0x0101001f,
    "description": 0x01010020,
    "targetPackage": 0x01010021,
    "handleProfiling": 0x01010022,
    "functionalTest": 0x01010023,
    "value": 0x01010024,
    "resource": 0x01010025,
    "mimeType": 0x01010026,
    "scheme": 0x01010027,
    "host": 0x01010028,
    "port": 0x01010029,
    "path": 0x0101002a,
    "pathPrefix": 0x0101002b,
    "pathPattern": 0x0101002c,
    "action": 0x0101002d,
    "data": 0x0101002e,
    "textSize": 0x01010095,
    "textColor": 0x01010098,
    "gravity": 0x010100af,
    "layout_gravity": 0x010100b3,
    "orientation": 0x010100c4,
    "id": 0x010100d0,
    "background": 0x010100d4,
    "padding": 0x010100d5,
    "visibility": 0x010100dc,
    "layout_width": 0x010100f4,
    "layout_height": 0x010100f5,
    "src": 0x01010119,
    "text": 0x0101014f,
    "layout_weight": 0x01010181,
    "minSdkVersion": 0x0101020c,
    "versionCode": 0x0101021b,
    "versionName": 0x0101021c,
    "targetSdkVersion": 0x01010270,
    "maxSdkVersion": 0x01010271,
    "allowBackup": 0x01010280,
    "glEsVersion": 0x01010281,
    "required": 0x0101028e,
    "installLocation": 0x010102b7,
    "compileSdkVersion": 0x01010572,
}


def load_public_xml(path: Union[str, Path]) -> dict[int, str]:
    """
    Read the attribute entries of a `public.xml` symbol file

    :param path: path to the file
    :returns: mapping of resource id to attribute name
    """
    tree = etree.parse(str(path))
    attributes = {}
    for node in tree.iter("public"):
        if node.get("type") != "attr":
            continue
        try:
            attributes[int(node.get("id", "0"), 16)] = node.get("name")
        except ValueError:
            logger.warning(
                "Skipping public entry '{}' with invalid id '{}'".format(
                    node.get("name"), node.get("id")
                )
            )
    logger.debug(f"load_public_xml: {len(attributes)} attributes from {path}")
    return attributes


class ResourceNameResolver:
    """
    Interface for looking up the symbolic name of a resource id.

    Returning `None` means the id is unknown, which is a normal outcome.
    Implementations may raise `LookupError` if their backing registry is
    not available at all. Answers for a given id must not change, as
    callers cache them.
    """

    def resolve(self, resource_id: int) -> Union[str, None]:
        raise NotImplementedError


class FrameworkAttributeResolver(ResourceNameResolver):
    """
    Resolves ids of the framework package (0x01......) against a table of
    attribute names.
    """

    def __init__(self, attributes: Union[dict[int, str], None] = None) -> None:
        """
        :param attributes: mapping of resource id to name, defaults to `SYSTEM_ATTRIBUTES`
        """
        if attributes is None:
            attributes = {v: k for k, v in SYSTEM_ATTRIBUTES.items()}
        self.attributes = attributes

    @classmethod
    def from_public_xml(cls, path: Union[str, Path]) -> "FrameworkAttributeResolver":
        return cls(load_public_xml(path))

    def resolve(self, resource_id: int) -> Union[str, None]:
        if resource_id is None or (resource_id >> 24) & 0xFF != FRAMEWORK_PACKAGE_ID:
            return None
        return self.attributes.get(resource_id)

    def __repr__(self):
        return "<FrameworkAttributeResolver #attributes={}>".format(len(self.attributes))
