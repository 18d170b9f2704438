from quoridor_rules.engine.state import BoardState, Cell, Orientation, PlayerState, Wall


def make_board(a, b, walls=(), walls_remaining=10):
    """Board with player A (goal row 1) on `a` and player B (goal row 9) on `b`."""
    return BoardState(
        players=[
            PlayerState(Cell(*a), 1, walls_remaining),
            PlayerState(Cell(*b), 9, walls_remaining),
        ],
        walls=set(walls),
    )


def hwall(x, y):
    return Wall(x, y, Orientation.HORIZONTAL)


def vwall(x, y):
    return Wall(x, y, Orientation.VERTICAL)


# Row 1 sealed off except for a pocket at column 8 (cells i2, i3); closing the
# pocket with vwall(8, 2) cuts both players off from their goals.
NEAR_BARRIER = [hwall(0, 2), hwall(2, 2), hwall(4, 2), hwall(6, 2), hwall(7, 4)]
CLOSING_WALL = vwall(8, 2)
