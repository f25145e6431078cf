"""
Panda Stack
===========

Arcade stacking game: pandas fall from the top of the screen and the player
nudges each one left or right so it lands squarely on the tower. A panda that
reaches the floor without a valid landing costs a life; losing the last life
ends the round.

Game parameters live in game_config.yaml next to this file.
"""
