"""Screen component helper tests"""

import unittest
import os
import sys

# Add the project root so the modules can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

try:
    import numpy as np
    from ui.components import frame_to_image
    HAS_IMAGING = True
except ImportError:
    HAS_IMAGING = False


@unittest.skipUnless(HAS_IMAGING, "numpy, Pillow ImageTk and tkinter are required")
class TestFrameToImage(unittest.TestCase):
    """Camera frame conversion for the preview"""

    def _frame(self, height, width, bgr):
        frame = np.zeros((height, width, 3), dtype=np.uint8)
        frame[:, :] = bgr
        return frame

    def test_bgr_channels_become_rgb(self):
        image = frame_to_image(self._frame(2, 4, (255, 0, 0)), 4)
        self.assertEqual(image.mode, "RGB")
        self.assertEqual(image.getpixel((0, 0)), (0, 0, 255))

        image = frame_to_image(self._frame(2, 4, (10, 20, 30)), 4)
        self.assertEqual(image.getpixel((3, 1)), (30, 20, 10))

    def test_scaled_to_width_keeping_aspect(self):
        image = frame_to_image(self._frame(480, 640, (0, 0, 0)), 320)
        self.assertEqual(image.size, (320, 240))

    def test_height_never_zero(self):
        image = frame_to_image(self._frame(1, 640, (0, 0, 0)), 32)
        self.assertEqual(image.size, (32, 1))


if __name__ == '__main__':
    unittest.main()
