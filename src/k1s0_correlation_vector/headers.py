"""相関ベクトルを運ぶ HTTP ヘッダー名"""

MS_CV = "MS-CV"
