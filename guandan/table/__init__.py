# 教学牌桌模块
from .player import Player, Position, OrganizedGroup, PLAY_ORDER, next_position
from .table_state import PlayAction, TableState, TableEvent
from .controller import TableController, TableError
