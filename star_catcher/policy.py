from star_catcher.items import ItemKind


def policy(env):
    # Strategy: chase the lowest star or power-up (the one that lands first), but
    # step aside when a bomb is about to land inside the basket's span. Stops
    # once the basket centre is within half a speed step of the target so it
    # does not jitter around it.
    catcher = env.session.catcher
    center = catcher.x + catcher.width / 2

    bombs = [i for i in env.session.items if i.kind is ItemKind.BOMB and i.y > catcher.y - 120]
    for bomb in bombs:
        bomb_center = bomb.x + bomb.size / 2
        if catcher.x - bomb.size <= bomb.x <= catcher.x + catcher.width:
            return [4, 0, 0] if bomb_center < center else [3, 0, 0]

    targets = [i for i in env.session.items if i.kind is not ItemKind.BOMB]
    if not targets:
        return [0, 0, 0]

    target = max(targets, key=lambda i: i.y)
    dx = (target.x + target.size / 2) - center
    if dx > catcher.speed / 2:
        return [4, 0, 0]  # Move right
    elif dx < -catcher.speed / 2:
        return [3, 0, 0]  # Move left
    else:
        return [0, 0, 0]
