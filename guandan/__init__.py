"""掼蛋教学辅助 - 牌型识别与压牌判定"""

__version__ = "0.1.0"
