from snooker.match_session import MatchSession
from snooker.models import Ball

session = MatchSession(starting_reds=1)

session.pot(Ball.RED)     # 1-0, break 1
session.pot(Ball.BLACK)   # black is not yellow -> turn passes to player 2

session.foul_plus_four()  # player 2 fouls: 5-0, player 1 back on

for colour in range(Ball.YELLOW, Ball.BLACK + 1):
    session.pot(colour)   # 2+3+4+5+6+7 = 27 break

print("Final:")
print(session.get_snapshot())

print("\nResult:")
print(session.result())

print("\nTrying a pot after the black...")
print("accepted:", session.pot(Ball.RED))  # frame is frozen -> False
