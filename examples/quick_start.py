"""
Quick Start Example for pyimgio.

Loads an image, makes an independent copy and writes it out at a few
quality/progressive settings so the resulting file sizes can be compared.
"""

import sys
from pathlib import Path

import numpy as np

from pyimgio import WriteOptions, copy_image, load_image, save_image
from pyimgio.inputs import image_from_array


def _demo_image():
    # Smooth gradient plus noise so JPEG quality has something to work with.
    rng = np.random.default_rng(0)
    h, w = 240, 320
    yy, xx = np.mgrid[0:h, 0:w]
    rgb = np.stack([xx * 255 // w, yy * 255 // h, np.full_like(xx, 128)], axis=-1)
    rgb = np.clip(rgb + rng.normal(0, 12, size=rgb.shape), 0, 255).astype(np.uint8)
    return image_from_array(rgb, input_format="rgb_u8_hwc")


def main():
    """Run quick start example."""
    print("=" * 60)
    print("pyimgio Quick Start Example")
    print("=" * 60 + "\n")

    out_dir = Path("quick_start_output")
    out_dir.mkdir(exist_ok=True)

    if len(sys.argv) > 1:
        print(f"Loading {sys.argv[1]}...")
        image = load_image(sys.argv[1])
    else:
        print("No input given, using a generated 320x240 image")
        image = _demo_image()

    print(f"Image: {image.size[0]}x{image.size[1]} ({image.mode})\n")

    working = copy_image(image)

    variants = {
        "q20.jpg": WriteOptions(quality=0.2),
        "q80.jpg": WriteOptions(),
        "q100_progressive.jpg": WriteOptions(quality=1.0, progressive=True),
        "lossless.png": WriteOptions(progressive=True),
    }

    for name, options in variants.items():
        path = save_image(working, out_dir / name, options)
        size_kb = Path(path).stat().st_size / 1024
        print(f"✓ {path:<45} {size_kb:8.1f} KiB")

    print("\n✓ Example complete!")


if __name__ == "__main__":
    main()
