#!/usr/bin/env python3
"""
Manifest Generator
Writes a static images.json snapshot of the image storage directory.
Run this script before publishing the application root to a static host,
so the viewer can load the gallery without the API.
"""
import sys
from pathlib import Path

from sphere_gallery.config import settings
from sphere_gallery.services.storage_service import ImageStore


def main():
    """Main function to generate the manifest."""
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(settings.STATIC_DIR) / "images.json"

    print("=" * 60)
    print("Sphere Gallery Manifest Generator")
    print("=" * 60)
    print()
    print(f"Images directory: {settings.IMAGES_DIR}")
    print(f"Output:           {output}")
    print()

    store = ImageStore(settings.IMAGES_DIR, url_prefix=settings.IMAGES_URL_PREFIX)

    try:
        count = store.write_manifest(output)
    except OSError as e:
        print(f"\n❌ Error generating manifest: {str(e)}")
        sys.exit(1)

    print(f"✅ Wrote {count} image(s) to {output}")


if __name__ == "__main__":
    main()
