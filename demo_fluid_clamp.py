#!/usr/bin/env python3
"""
Demo: fluid type scale → fluid-clamp → plain CSS

Shows the full workflow:
1. Configure the plugin
2. Process a stylesheet using @fluid()
3. Print the rewritten CSS and any warnings
"""

from fluidclamp import FluidClamp
from fluidclamp.config import config_from_yaml


OPTIONS = """
warnings: true
minWidth: 375
maxWidth: 1440
"""

STYLESHEET = """\
:root {
  --step-0: clamp(1rem, @fluid(), 1.125rem);
  --step-1: clamp(1.25rem, @fluid(), 1.5rem);
  --step-2: clamp(1.5rem, @fluid(320, 1024), 2rem);
}

.hero {
  padding: clamp(16px, @fluid(), 64px) 0;
  margin: clamp(1rem, @fluid(768, 768, 20), 2rem);
}

.broken {
  font-size: clamp(1rem, @fluid(320), 2rem);
}
"""


def main():
    print("=" * 70)
    print("FLUID CLAMP DEMO")
    print("=" * 70)

    config = config_from_yaml(OPTIONS)
    print(f"\nOptions: {config.to_dict()}")

    plugin = FluidClamp(config)
    result = plugin.process(STYLESHEET)

    print(f"\nRewrote {result.changed_declarations} declaration(s):\n")
    print(result.css)

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"   - line {warning.line} ({warning.prop}): {warning.text}")
    else:
        print("✨ NO WARNINGS")


if __name__ == "__main__":
    main()
