from viz.render import viz

__all__ = ["viz"]
