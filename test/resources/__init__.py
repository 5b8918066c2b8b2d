TEAM_A = "Red Storm"
TEAM_B = "Blue Thunder"
TEAM_A_PLAYERS = ["A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K"]
TEAM_B_PLAYERS = ["X", "Y", "Z", "P", "Q", "R", "S", "T", "U", "V", "O"]
