from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def with_alpha(color: RGBA, alpha: float) -> RGBA:
    r, g, b, a = color
    return (r, g, b, int(round(max(0.0, min(1.0, alpha)) * a)))


def clear_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> None:
    xa, ya, xb, yb = _clip_rect(dst, x0, y0, x1, y1)
    if xa >= xb or ya >= yb:
        return
    dst[ya:yb, xa:xb] = 0


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Blend `color` over the half-open pixel rect [x0, x1) x [y0, y1)."""

    xa, ya, xb, yb = _clip_rect(dst, x0, y0, x1, y1)
    if xa >= xb or ya >= yb:
        return
    coverage = np.full((yb - ya, xb - xa), 255, dtype=np.uint8)
    blend_mask(dst, xa, ya, coverage, color)


def blend_mask(
    dst: np.ndarray,
    x: int,
    y: int,
    mask: np.ndarray,
    color: RGBA,
) -> None:
    """Source-over composite of `color` scaled by an 8-bit coverage mask."""

    h, w = mask.shape
    if h <= 0 or w <= 0:
        return

    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0

    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def _clip_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> tuple[int, int, int, int]:
    xa = max(0, min(int(x0), int(x1)))
    xb = min(dst.shape[1], max(int(x0), int(x1)))
    ya = max(0, min(int(y0), int(y1)))
    yb = min(dst.shape[0], max(int(y0), int(y1)))
    return xa, ya, xb, yb
