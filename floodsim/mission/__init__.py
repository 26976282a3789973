"""Victims and the detection generator.

Components:
    Victim: Person awaiting rescue, rescued at most once.
    DetectionRecord: Audit record emitted for every detected victim.
    generate_victims: Uniform-by-area placement inside the flood disc.
    sample_victim_count: Jittered victim count from the density hint.
"""

from .detection import generate_victims, sample_victim_count
from .victim import DetectionRecord, Victim

__all__ = ["Victim", "DetectionRecord", "generate_victims", "sample_victim_count"]
