from realtime.broker import ChangeBroker, ChangeEvent, broker
from realtime.mirror import CollectionMirror

__all__ = ['ChangeBroker', 'ChangeEvent', 'CollectionMirror', 'broker']
