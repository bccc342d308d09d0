#!/usr/bin/env python3
"""
Demo script to walk through the FlagGate registry.
Registers a few flags, queries their eligibility, then toggles one from a
background thread while the main thread observes it.
"""
import threading
import time

from flaggate.config import configure_logging, get_settings
from flaggate.features import FlagRegistry
from flaggate.models.schemas import Condition, FeatureDefinition

CURRENT_LEVEL = 29
CURRENT_VERSION = "1.0.0"


def print_section(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70 + "\n")


def print_features(registry: FlagRegistry):
    """Print every flag with its rules and eligibility."""
    for feature in registry.get_all():
        status_icon = "✓" if feature.enabled else "○"
        supported = registry.is_supported(feature.name, CURRENT_LEVEL, CURRENT_VERSION)
        print(f"  {status_icon} {feature.name:10} levels={feature.condition.supported_levels} "
              f"versions={feature.condition.supported_versions} supported={supported}")


def main():
    """Run registry demonstration."""
    settings = get_settings(cache_enabled=False, log_level="INFO")
    configure_logging(settings)

    print_section("FlagGate Registry Demo")
    registry = FlagRegistry(settings=settings)

    registry.save_many([
        FeatureDefinition(name="feature1", enabled=True, condition=Condition(
            supported_levels=[">=29"], supported_versions=[">=1.0.0"])),
        FeatureDefinition(name="feature2", enabled=False, condition=Condition(
            supported_levels=["<=29"], supported_versions=[">=1.0.1"])),
        FeatureDefinition(name="feature3", enabled=True, condition=Condition(
            supported_levels=["32-36"], supported_versions=[">=1.0.2"])),
    ])

    print(f"Host level {CURRENT_LEVEL}, version {CURRENT_VERSION}\n")
    print_features(registry)

    print_section("Lookups")
    print(f"  feature4 supported levels: {registry.get_supported_levels('feature4')}")
    print(f"  feature4 supported on level: {registry.is_supported_level('feature4', CURRENT_LEVEL)}")
    print(f"  feature5 enabled: {registry.is_enabled('feature5')}")
    print(f"  has enabled flags: {registry.has_enabled()}")

    print_section("Observing feature4")
    registry.save(FeatureDefinition(name="feature4", enabled=False, condition=Condition(
        supported_levels=["<29"], supported_versions=[">=1.0.4"])))

    observation = registry.observe("feature4")

    def toggle():
        for enabled in (True, False):
            time.sleep(0.5)
            registry.update(FeatureDefinition(name="feature4", enabled=enabled))
        time.sleep(0.5)
        observation.close()

    worker = threading.Thread(target=toggle)
    worker.start()
    for enabled in observation:
        print(f"  feature4 is now {enabled}")
    worker.join()

    print_section("Demo Complete")


if __name__ == "__main__":
    main()
