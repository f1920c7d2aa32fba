""" Remote context document loaders. """
