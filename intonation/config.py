"""YAML configuration for the tuner CLI.

```yaml
tuner:
  reference: 440.0
  accidental: sharp      # or flat
  accuracy: 10           # in-tune band, cents
osc:
  enabled: false
  receive_port: 9000
  send_port: 9001
  send_host: 127.0.0.1
```

Every key is optional; a missing file gives the defaults.
"""

import dataclasses
import logging
import os
import typing

import yaml

import intonation.constants
import intonation.needle
import intonation.pitch


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class TunerConfig:

	"""
	Settings for a tuner session and its optional OSC bridge.
	"""

	reference: float = intonation.constants.REFERENCE_FREQUENCY
	accidental: intonation.pitch.AccidentalMode = intonation.pitch.AccidentalMode.SHARP
	accuracy: float = intonation.constants.ACCURACY_GOOD
	osc_enabled: bool = False
	osc_receive_port: int = intonation.constants.OSC_RECEIVE_PORT
	osc_send_port: int = intonation.constants.OSC_SEND_PORT
	osc_send_host: str = intonation.constants.OSC_SEND_HOST


def _section (data: typing.Dict[str, typing.Any], name: str) -> typing.Dict[str, typing.Any]:

	section = data.get(name) or {}

	if not isinstance(section, dict):
		raise ValueError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")

	return section


def parse_config (data: typing.Optional[typing.Dict[str, typing.Any]]) -> TunerConfig:

	"""Build a ``TunerConfig`` from already-parsed YAML data.

	Raises:
		ValueError: If a value has the wrong type or is out of range.
	"""

	if data is None:
		data = {}

	if not isinstance(data, dict):
		raise ValueError(f"Config must be a mapping, got {type(data).__name__}")

	tuner = _section(data, "tuner")
	osc = _section(data, "osc")
	defaults = TunerConfig()

	try:
		reference = intonation.pitch.semitone_frequency(0, tuner.get("reference", defaults.reference))
		accidental = intonation.pitch.AccidentalMode.parse(tuner.get("accidental", defaults.accidental))
		accuracy = intonation.needle.check_accuracy(tuner.get("accuracy", defaults.accuracy))

		return TunerConfig(
			reference = reference,
			accidental = accidental,
			accuracy = accuracy,
			osc_enabled = bool(osc.get("enabled", defaults.osc_enabled)),
			osc_receive_port = int(osc.get("receive_port", defaults.osc_receive_port)),
			osc_send_port = int(osc.get("send_port", defaults.osc_send_port)),
			osc_send_host = str(osc.get("send_host", defaults.osc_send_host))
		)

	except TypeError as e:
		raise ValueError(f"Invalid config value: {e}") from e


def load_config (config_path: str = 'intonation.yaml') -> TunerConfig:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return TunerConfig()

	with open(config_path, 'r') as f:
		return parse_config(yaml.safe_load(f))
