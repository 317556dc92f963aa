"""Factory helpers for creating the main menu entities."""
from esper import World

from sumstack.menu.components import MenuAction, MenuBackground, MenuButton, MenuTag


def spawn_main_menu(world: World, width: int, height: int) -> None:
    """Create the menu background and one button per play mode."""
    clear_main_menu(world)
    center_x = width / 2
    button_y = height * 0.22

    world.create_entity(MenuBackground(), MenuTag())
    button_specs = (
        ("Classic", MenuAction.CLASSIC, center_x - 110.0),
        ("Timed", MenuAction.TIMED, center_x + 110.0),
    )
    for label, action, x_position in button_specs:
        world.create_entity(
            MenuButton(label=label, action=action, x=x_position, y=button_y),
            MenuTag(),
        )


def clear_main_menu(world: World) -> None:
    """Remove all entities that are part of the menu UI."""
    to_delete: set[int] = set()
    for ent, _ in world.get_component(MenuButton):
        to_delete.add(ent)
    for ent, _ in world.get_component(MenuBackground):
        to_delete.add(ent)
    for ent, _ in world.get_component(MenuTag):
        to_delete.add(ent)
    for ent in to_delete:
        world.delete_entity(ent, immediate=True)
