"""OSC bridge between a tuner and external estimators or visualisers.

The server listens on a UDP port (default 9000) for incoming messages and
sends every new reading to a target host/port (default 127.0.0.1:9001).

Receive Handlers
────────────────
- ``/frequency <float>``: Feed a pitch estimate to the tuner
- ``/accidental <str>``: ``sharp``, ``flat`` or ``toggle``
- ``/reference <float>``: Set the frequency of A4

Send Events
───────────
- ``/note <str>``: ASCII note name, e.g. ``A#4``
- ``/cents <float>``: Deviation from the nearest pitch
- ``/frequency <float>``: The input frequency
- ``/in_tune <int>``: ``1`` inside the in-tune band, else ``0``
"""

import asyncio
import logging
import typing

import pythonosc.dispatcher
import pythonosc.osc_server
import pythonosc.udp_client

import intonation.constants
import intonation.needle
import intonation.pitch

if typing.TYPE_CHECKING:
	from intonation.tuner import Tuner


logger = logging.getLogger(__name__)


class OscServer:

	"""Async OSC server/client wired to a ``Tuner``."""

	def __init__ (
		self,
		tuner: "Tuner",
		receive_port: int = intonation.constants.OSC_RECEIVE_PORT,
		send_port: int = intonation.constants.OSC_SEND_PORT,
		send_host: str = intonation.constants.OSC_SEND_HOST
	) -> None:

		self._tuner = tuner
		self._receive_port = receive_port
		self._send_port = send_port
		self._send_host = send_host

		self._server: typing.Optional[typing.Any] = None
		self._transport: typing.Optional[asyncio.BaseTransport] = None
		self._client: typing.Optional[pythonosc.udp_client.SimpleUDPClient] = None
		self._dispatcher = pythonosc.dispatcher.Dispatcher()

		self._dispatcher.map("/frequency", self._handle_frequency)
		self._dispatcher.map("/accidental", self._handle_accidental)
		self._dispatcher.map("/reference", self._handle_reference)


	async def start (self) -> None:

		"""Start the OSC server and client, and begin publishing readings."""

		self._client = pythonosc.udp_client.SimpleUDPClient(self._send_host, self._send_port)

		self._server = pythonosc.osc_server.AsyncIOOSCUDPServer(
			("0.0.0.0", self._receive_port),
			self._dispatcher,
			asyncio.get_running_loop()  # type: ignore[arg-type]
		)

		transport, _ = await self._server.create_serve_endpoint()
		self._transport = transport

		self._tuner.on_note(self.publish)

		logger.info(f"OSC listening on :{self._receive_port}, sending to {self._send_host}:{self._send_port}")


	async def stop (self) -> None:

		"""Stop the OSC server and stop publishing."""

		if self._transport:
			self._tuner.off_note(self.publish)
			self._transport.close()
			self._transport = None
			logger.info("OSC server stopped")


	def send (self, address: str, *args: typing.Any) -> None:

		"""Send an OSC message."""

		if self._client:
			try:
				self._client.send_message(address, args)
			except Exception as e:
				logger.warning(f"OSC send error: {e}")


	def publish (self, note: intonation.pitch.PitchedNote) -> None:

		"""Send one reading as ``/note``, ``/cents``, ``/frequency`` and ``/in_tune``."""

		in_tune = intonation.needle.is_in_tune(note.cents, self._tuner.accuracy)

		self.send("/note", note.ascii_name)
		self.send("/cents", float(note.cents))
		self.send("/frequency", float(note.frequency))
		self.send("/in_tune", int(in_tune))


	def map (self, address: str, handler: typing.Callable) -> None:

		"""Register a custom OSC handler."""

		self._dispatcher.map(address, handler)


	# Handlers

	def _handle_frequency (self, address: str, *args: typing.Any) -> None:
		if not args:
			return
		try:
			frequency = float(args[0])
		except (ValueError, TypeError):
			logger.warning(f"Invalid OSC frequency argument: {args[0]}")
			return
		self._tuner.feed(frequency)

	def _handle_accidental (self, address: str, *args: typing.Any) -> None:
		if not args:
			return
		value = str(args[0]).strip().lower()
		if value == "toggle":
			self._tuner.toggle_accidental()
			return
		try:
			self._tuner.mode = value
		except ValueError:
			logger.warning(f"Invalid OSC accidental argument: {args[0]}")

	def _handle_reference (self, address: str, *args: typing.Any) -> None:
		if not args:
			return
		try:
			self._tuner.reference = float(args[0])
		except (ValueError, TypeError):
			logger.warning(f"Invalid OSC reference argument: {args[0]}")
