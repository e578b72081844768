"""Default keybindings, per scope, as action -> keys."""

from enum import Enum

from .actions import (
    CommonAction as C,
    GlobalAction as G,
    LogsAction as L,
    QueueAction as Q,
    Scope,
)
from .bindings import Key, Modifiers as M

# fmt: off
DEFAULT_KEYBINDS: dict[Scope, dict[Enum, tuple[Key, ...]]] = {
    Scope.GLOBAL: {
        G.QUIT:             (Key("q"),),
        G.NEXT_TRACK:       (Key(">"),),
        G.PREVIOUS_TRACK:   (Key("<"),),
        G.STOP:             (Key("s"),),
        G.TOGGLE_REPEAT:    (Key("z"),),
        G.TOGGLE_RANDOM:    (Key("x"),),
        G.TOGGLE_SINGLE:    (Key("c"),),
        G.TOGGLE_PAUSE:     (Key("p"),),
        G.SEEK_FORWARD:     (Key("f"),),
        G.SEEK_BACK:        (Key("b"),),
        G.VOLUME_DOWN:      (Key(","),),
        G.VOLUME_UP:        (Key("."),),
        G.NEXT_TAB:         (Key("Right"),),
        G.PREVIOUS_TAB:     (Key("Left"),),
        G.TOGGLE_CONSUME:   (Key("v"),),
    },
    Scope.NAVIGATION: {
        C.UP:               (Key("k"), Key("Up")),
        C.DOWN:             (Key("j"), Key("Down")),
        C.MOVE_UP:          (Key("K", M.SHIFT),),
        C.MOVE_DOWN:        (Key("J", M.SHIFT),),
        C.RIGHT:            (Key("l"),),
        C.LEFT:             (Key("h"),),
        C.DOWN_HALF:        (Key("d", M.CONTROL), Key("PageDown")),
        C.UP_HALF:          (Key("u", M.CONTROL), Key("PageUp")),
        C.BOTTOM:           (Key("G", M.SHIFT), Key("End")),
        C.TOP:              (Key("g"), Key("Home")),
        C.ENTER_SEARCH:     (Key("/"),),
        C.NEXT_RESULT:      (Key("n", M.CONTROL),),
        C.PREVIOUS_RESULT:  (Key("N", M.SHIFT),),
        C.SELECT:           (Key(" "),),
        C.ADD:              (Key("a"),),
        C.DELETE:           (Key("D", M.SHIFT),),
        C.RENAME:           (Key("r"),),
        C.CLOSE:            (Key("c", M.CONTROL), Key("Esc")),
        C.CONFIRM:          (Key("Enter"),),
        C.FOCUS_INPUT:      (Key("i"),),
    },
    Scope.QUEUE: {
        Q.DELETE:           (Key("d"),),
        Q.DELETE_ALL:       (Key("D", M.SHIFT),),
        Q.PLAY:             (Key("Enter"),),
        Q.SAVE:             (Key("s", M.CONTROL),),
        Q.ADD_TO_PLAYLIST:  (Key("a"),),
    },
    Scope.DIRECTORIES: {},
    Scope.ARTISTS: {},
    Scope.ALBUMS: {},
    Scope.PLAYLISTS: {},
    Scope.LOGS: {
        L.CLEAR:            (Key("D", M.SHIFT),),
    },
}
# fmt: on
