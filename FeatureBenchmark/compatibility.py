"""
Detector/descriptor pairing compatibility.
Loads pairing rules from pairing_compatibility.json.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .core_data_structures import DetectorType, DescriptorType
from .exceptions import IncompatiblePairingError
from .logger import get_logger

logger = get_logger("compatibility")


class PairingCompatibilityManager:
    """Manages detector-descriptor compatibility from JSON configuration"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize compatibility manager

        Args:
            config_path: Path to compatibility JSON file.
                        If None, uses pairing_compatibility.json in the package directory.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "pairing_compatibility.json"

        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from JSON file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Compatibility config not found at {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.config_path}: {e}") from e

        logger.debug(f"Loaded pairing compatibility config v{config.get('version', 'unknown')}")
        return config

    def get_incompatibility_reason(self,
                                   detector: Union[str, DetectorType],
                                   descriptor: Union[str, DescriptorType]) -> Optional[str]:
        """
        Reason why a pairing is invalid

        Returns:
            Reason string, or None if the pairing is compatible
        """
        detector = DetectorType.from_name(detector).value
        descriptor = DescriptorType.from_name(descriptor).value

        for rule in self.config.get('incompatible_pairings', []):
            if rule['detector'].upper() == detector and rule['descriptor'].upper() == descriptor:
                return rule.get('reason', 'known incompatible pairing')

        requirement = self.config.get('descriptor_requirements', {}).get(descriptor)
        if requirement:
            allowed = [d.upper() for d in requirement.get('detectors', [])]
            if detector not in allowed:
                return requirement.get('reason', f"{descriptor} requires one of {', '.join(allowed)}")

        return None

    def is_compatible(self,
                      detector: Union[str, DetectorType],
                      descriptor: Union[str, DescriptorType]) -> bool:
        return self.get_incompatibility_reason(detector, descriptor) is None

    def check_pairing(self,
                      detector: Union[str, DetectorType],
                      descriptor: Union[str, DescriptorType]):
        """
        Raises:
            IncompatiblePairingError: If the pairing is known to be invalid
        """
        reason = self.get_incompatibility_reason(detector, descriptor)
        if reason is not None:
            raise IncompatiblePairingError(
                DetectorType.from_name(detector).value,
                DescriptorType.from_name(descriptor).value,
                reason
            )

    def find_incompatible(self,
                          detectors: List[str],
                          descriptors: List[str]) -> List[Tuple[str, str, str]]:
        """List every (detector, descriptor, reason) in a cross product that is invalid"""
        incompatible = []
        for detector in detectors:
            for descriptor in descriptors:
                reason = self.get_incompatibility_reason(detector, descriptor)
                if reason is not None:
                    incompatible.append((
                        DetectorType.from_name(detector).value,
                        DescriptorType.from_name(descriptor).value,
                        reason
                    ))
        return incompatible
