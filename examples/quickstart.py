"""NeoGuard Quickstart: a DART-like deflection and a crater estimate."""

from neoguard.core.uncertainty import UncertaintyValue
from neoguard.deflection.kinetic import (
    calculate_momentum_transfer,
    create_dart_like_mission,
    create_head_on_impact,
)
from neoguard.impact.crater import calculate_crater

# Dimorphos, roughly as measured after DART
dimorphos_mass = UncertaintyValue(4.3e9, 0.5e9, "kg")

deflection = calculate_momentum_transfer(
    create_dart_like_mission(), "rocky", create_head_on_impact(75.0), dimorphos_mass
)

print(f"Beta:      {deflection.beta}")
print(f"Delta-V:   {deflection.delta_v}")
print(f"Valid:     {deflection.within_validity_range}")
for warning in deflection.warnings:
    print(f"  warning: {warning}")

# A 1 Mt-class impact into sedimentary rock
crater = calculate_crater(
    UncertaintyValue.from_relative(4.184e15, 0.2, "J"),
    UncertaintyValue(17000.0, 1000.0, "m/s"),
    UncertaintyValue(45.0, 5.0, "deg"),
    UncertaintyValue(3000.0, 300.0, "kg/m³"),
    "sedimentaryRock",
)

print(f"Regime:    {crater.regime.value}")
print(f"Diameter:  {crater.diameter}")
print(f"Depth:     {crater.depth}")
