"""Difference-of-Gaussians (DoG) edge/blob enhancement with vertical stacking.

Each input image is blurred at two scales (`sigma` and `k * sigma`), the two
blurs are subtracted per channel, and the resulting DoG responses are stacked
top-to-bottom into a single output image.

Images are `uint8` numpy arrays of shape (H, W, 3) in RGB order; the I/O layer
handles OpenCV's BGR convention.
"""
