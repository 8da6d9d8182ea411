import logging
import time

import intonation
import intonation.display

logging.basicConfig(level=logging.INFO)

# Stand-in for a pitch estimator: a slow slide from E2 up to E4, with an
# occasional dropout where nothing was detected.
def estimates ():

	frequency = 82.41

	for i in range(400):
		yield None if i % 37 == 0 else frequency
		frequency *= 2.0 ** (2.0 / 400)

tuner = intonation.Tuner(mode="sharp", accuracy=10)
display = intonation.display.Display(tuner)

display.start()

try:
	for i, estimate in enumerate(estimates()):

		# Flip the spelling halfway through to show the toggle.
		if i == 200:
			tuner.toggle_accidental()

		tuner.feed(estimate)
		time.sleep(0.02)

finally:
	display.stop()

logging.info(f"Last reading: {tuner.note.name} {tuner.note.cents:+.1f} cents")
