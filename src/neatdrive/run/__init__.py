from neatdrive.run.config import Config

__all__ = ['Config']
